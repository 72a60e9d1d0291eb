"""goldsync core package."""
