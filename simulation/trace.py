"""
Purpose: Record what the vehicle did, tick by tick.
What it does:
Subscribes to DeliveryProgress events on an EventBus and keeps one row per
tick, so a run can be inspected as a pandas DataFrame or saved as CSV.
"""

from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from dispatch.events import DeliveryCompleted, DeliveryProgress, EventBus

TRACE_COLUMNS = [
    "at_ms",
    "order_id",
    "delivery_id",
    "x",
    "y",
    "progress",
    "eta_minutes",
    "vehicle_status",
    "status_text",
]


class TraceRecorder:

    def __init__(self, events: EventBus):
        self.rows: List[Dict[str, Any]] = []
        self.completed: List[str] = []
        events.subscribe(DeliveryProgress, self._on_progress)
        events.subscribe(DeliveryCompleted, self._on_completed)

    def _on_progress(self, event: DeliveryProgress) -> None:
        self.rows.append({
            "at_ms": event.at_ms,
            "order_id": event.order_id,
            "delivery_id": event.delivery_id,
            "x": event.position.x,
            "y": event.position.y,
            "progress": event.progress,
            "eta_minutes": event.eta_minutes,
            "vehicle_status": event.vehicle_status,
            "status_text": event.status_text,
        })

    def _on_completed(self, event: DeliveryCompleted) -> None:
        self.completed.append(event.order_id)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=TRACE_COLUMNS)

    def summary(self) -> pd.DataFrame:
        """
        One row per delivery: first/last tick time, ticks recorded, final position.
        """
        frame = self.to_dataframe()
        if frame.empty:
            return pd.DataFrame(columns=["delivery_id", "started_ms", "finished_ms", "ticks", "final_x", "final_y"])
        grouped = frame.groupby("delivery_id", sort=False)
        return pd.DataFrame({
            "started_ms": grouped["at_ms"].min(),
            "finished_ms": grouped["at_ms"].max(),
            "ticks": grouped.size(),
            "final_x": grouped["x"].last(),
            "final_y": grouped["y"].last(),
        }).reset_index()

    def write_csv(self, path) -> None:
        self.to_dataframe().to_csv(path, index=False)
