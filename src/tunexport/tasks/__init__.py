"""Tasks that consume a parsed library: reports, playlist files and file export."""
