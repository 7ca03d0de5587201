"""HTTP API for pool decoding, quotes and route building."""
