"""Infrastructure: git subprocesses, history lookup, and filesystem I/O."""
