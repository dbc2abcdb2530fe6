"""Pure calculation code; nothing in here performs I/O."""
