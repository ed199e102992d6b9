"""Global pytest configuration."""

import os
import tempfile

# Keep uploads out of the working tree before any imports read settings
os.environ.setdefault("UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "kb-test-uploads"))
