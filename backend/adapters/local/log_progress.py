"""LogProgressAdapter: writes one INFO line per pipeline stage."""

import logging
from typing import Optional

from ports.progress import STAGES, ProgressPort, Stage

logger = logging.getLogger(__name__)


class LogProgressAdapter(ProgressPort):
    def report(
        self,
        job_id: str,
        stage: Stage,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        step = f"{STAGES.index(stage) + 1}/{len(STAGES)}" if stage in STAGES else "?"
        parts = [f"[{job_id}] stage {step} {stage}"]
        if progress > 0:
            parts.append(f"{progress:.0%}")
        line = " ".join(parts)
        logger.info(f"{line}: {detail}" if detail else line)
