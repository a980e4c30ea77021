"""Launch pipeline: natives, classpath, arguments and the launcher itself."""
