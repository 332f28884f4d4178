"""Infrastructure layer: settings, logging, and the composition root."""
