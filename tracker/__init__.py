"""Personal restaurant tracker: catalog, annotations, filters and recommendations."""
