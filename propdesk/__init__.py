"""propdesk: property and prospect records with live document checklists."""
