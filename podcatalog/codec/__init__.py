"""Document Codec: catalog entities, audit events and attachment index entries <-> semantic documents."""
