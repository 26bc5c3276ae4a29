"""Build-time faceted filter pages for static catalog sites."""
