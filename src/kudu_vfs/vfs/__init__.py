"""Path normalization and response models for the remote VFS."""
