"""Request plumbing shared by the API features."""
