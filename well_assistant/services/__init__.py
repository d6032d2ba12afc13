"""Pipeline and chat services for the well drilling data assistant."""
