import os
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="rainalert-tests-")
os.environ.setdefault("RAINALERT_DB_URL", f"sqlite:///{_tmp_dir}/rainalert.db")
os.environ.setdefault("MAPS_API_KEY", "test-maps-key")
os.environ.setdefault("FORECAST_API_KEY", "test-forecast-key")
