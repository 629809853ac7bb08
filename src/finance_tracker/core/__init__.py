"""Cross-cutting pieces: security, errors, logging, taxonomy."""
