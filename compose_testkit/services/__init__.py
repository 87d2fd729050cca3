"""Services for compose-testkit."""
