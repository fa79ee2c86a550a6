"""Pure value types and rules shared by repositories and services."""
