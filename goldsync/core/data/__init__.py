"""Document store access, range query codec and cache reader/writer."""
