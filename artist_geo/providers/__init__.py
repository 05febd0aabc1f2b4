"""External metadata sources that feed raw records into the location store."""
