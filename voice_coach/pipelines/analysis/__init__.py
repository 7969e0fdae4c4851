"""Session analysis pipeline package.

Modules are organised by the order in which ``AnalysisPipeline.run`` executes
them; see ``flow`` for the full map. The HTTP controllers only import the
pipeline class, so each stage can be tested on its own.
"""

from .flow import AnalysisPipeline, PipelineStage
from .metrics import measure_speech
from .persistence import save_session
from .storage import recording_path, store_recording
from .tips import coaching_tips
from .transcription import transcribe_recording
from .types import StageOutcome, StoredAudio

__all__ = [
    "AnalysisPipeline",
    "PipelineStage",
    "StageOutcome",
    "StoredAudio",
    "coaching_tips",
    "measure_speech",
    "recording_path",
    "save_session",
    "store_recording",
    "transcribe_recording",
]
