import os
import tempfile

# Settings modülü import edilmeden önce ayarlanmalı
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="watchtogether-"))
