"""解析結果の保存モジュール"""

from keiba_paste.storage.models import Base, ParsedHorse, ParsedOdds, ParsedRace
from keiba_paste.storage.repository import ParsedRaceRepository

__all__ = ["Base", "ParsedHorse", "ParsedOdds", "ParsedRace", "ParsedRaceRepository"]
