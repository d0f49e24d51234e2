"""Wire formats, key generators and export for compiled documents."""
