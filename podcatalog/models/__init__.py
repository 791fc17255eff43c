"""Domain models: catalog entities, audit events, attachments, and the document graph."""
