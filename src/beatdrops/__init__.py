"""beatdrops: share the songs you love and like what others post."""
