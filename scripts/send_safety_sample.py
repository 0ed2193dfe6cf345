#!/usr/bin/env python3
"""
Send sample safety traffic to a running server.

Usage:
    # A vitals sample (fall or abnormal heart rate escalates)
    python scripts/send_safety_sample.py vitals --user-id u1 --heart-rate 135

    # Free text through the chatbox
    python scripts/send_safety_sample.py say --user-id u1 "I fell down and I can't breathe"

    # The emergency button
    python scripts/send_safety_sample.py emergency --user-id u1 --lat 40.4433 --lng -79.9436
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import typer

app = typer.Typer()

DEFAULT_BASE_URL = "http://localhost:8000"


async def _post(base_url: str, path: str, payload: dict[str, Any]) -> None:
    async with httpx.AsyncClient(timeout=30) as client:
        response = await client.post(f"{base_url}/api/v1{path}", json=payload)

    if response.status_code != 200:
        typer.echo(f"❌ {path} failed: {response.status_code}", err=True)
        typer.echo(response.text, err=True)
        raise typer.Exit(1)

    data = response.json()
    # Audio is a long data URL; keep the output readable
    if data.get("audioUrl"):
        data["audioUrl"] = data["audioUrl"][:48] + "..."
    alert = data.get("alert") or {}
    typer.echo(f"✅ level={alert.get('level', 'n/a')} alertId={data.get('alertId')}")
    typer.echo(json.dumps(data, indent=2))


@app.command()
def vitals(
    user_id: str = typer.Option(..., help="Subject id"),
    heart_rate: Optional[float] = typer.Option(None, help="Heart rate in bpm"),
    fall: bool = typer.Option(False, help="Report a fall"),
    base_url: str = typer.Option(DEFAULT_BASE_URL, help="Server base URL"),
):
    """Send a vitals sample."""
    sample: dict[str, Any] = {"timestamp": datetime.now(timezone.utc).isoformat()}
    if heart_rate is not None:
        sample["heartRate"] = heart_rate
    if fall:
        sample["fallDetected"] = True
    asyncio.run(_post(base_url, "/safety/vitals", {"userId": user_id, "vitals": sample}))


@app.command()
def say(
    text: str = typer.Argument(..., help="What the user says"),
    user_id: str = typer.Option(..., help="Subject id"),
    base_url: str = typer.Option(DEFAULT_BASE_URL, help="Server base URL"),
):
    """Send free text through the chatbox."""
    asyncio.run(_post(base_url, "/chatbox", {"userId": user_id, "input": text}))


@app.command()
def emergency(
    user_id: str = typer.Option(..., help="Subject id"),
    kind: Optional[str] = typer.Option(None, help="What happened, e.g. 'fall'"),
    lat: Optional[float] = typer.Option(None, help="Latitude"),
    lng: Optional[float] = typer.Option(None, help="Longitude"),
    base_url: str = typer.Option(DEFAULT_BASE_URL, help="Server base URL"),
):
    """Press the emergency button."""
    payload: dict[str, Any] = {"userId": user_id, "type": kind}
    if lat is not None and lng is not None:
        payload["location"] = {"lat": lat, "lng": lng}
    asyncio.run(_post(base_url, "/safety/emergency", payload))


if __name__ == "__main__":
    app()
