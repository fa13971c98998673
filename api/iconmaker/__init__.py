"""Icon creation service: procedural renderer, ICO encoder, saved-icon library."""
