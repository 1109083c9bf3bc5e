"""Client intake wizard: store, validation, progress, uploads, notifications."""
