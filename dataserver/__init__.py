"""Data server - checksum-verified block ingestion with archival forwarding."""
