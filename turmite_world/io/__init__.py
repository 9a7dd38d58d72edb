"""I/O layer: machine-kind files, trace schemas, and output paths."""
