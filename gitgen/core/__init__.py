"""gitgen core — cascade resolution, compaction and the content-addressed store."""
