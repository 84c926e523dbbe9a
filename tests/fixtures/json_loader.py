import copy
import json
from pathlib import Path
from typing import Any, Dict, Tuple

FIXTURE_FILE = Path(__file__).parent / "test_data.json"


class TestDataLoader:
    """Request payloads shared by the API tests, read once per run"""

    __test__ = False
    _payloads: Dict[str, Any] = None

    @classmethod
    def payloads(cls) -> Dict[str, Any]:
        if cls._payloads is None:
            cls._payloads = json.loads(FIXTURE_FILE.read_text(encoding="utf-8"))
        return cls._payloads

    @classmethod
    def get(cls, key: str) -> Any:
        return cls.payloads()[key]

    @classmethod
    def get_copy(cls, key: str) -> Any:
        return copy.deepcopy(cls.get(key))

    @classmethod
    def csv_upload(cls, key: str, filename: str = "people.csv") -> Dict[str, Tuple[str, bytes, str]]:
        """Multipart ``files`` argument carrying a CSV fixture"""
        return {"file": (filename, cls.get(key).encode("utf-8"), "text/csv")}
