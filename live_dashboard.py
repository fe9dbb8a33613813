"""Live check: connect to /ws/dashboard, switch filters, print pushed views."""

import asyncio
import json
import os

import websockets


HOST = os.environ.get("ADMITPULSE_HOST", "127.0.0.1:8000")
DASHBOARD_URI = f"ws://{HOST}/ws/dashboard"


def print_view(data: dict) -> None:
    snapshot = data.get("snapshot", {})
    summary = snapshot.get("summary", {})
    share = snapshot.get("loginTypeShare", {})

    print("=" * 70)
    print(f"[DASHBOARD] filters={data.get('filters') or 'all'}  stale={data.get('stale')}")
    if data.get("error"):
        print(f"  Error:        {data['error']}")
    print(f"  Last updated: {snapshot.get('lastUpdated')}")
    print(f"  Total admits: {summary.get('totalAdmits')}")
    print(f"  Automated:    {summary.get('automatedLogins')} ({share.get('automatedPercentage')}%)")
    print(f"  Manual:       {summary.get('manualLogins')} ({share.get('manualPercentage')}%)")

    print("\n  Top centres:")
    for datum in snapshot.get("studentsPerCentre", [])[:5]:
        print(f"    {datum['label']:>6}  {datum['value']}")

    print(f"\n  Table rows: {len(snapshot.get('table', []))}")
    options = snapshot.get("filters", {})
    print(f"  Exam codes: {options.get('examCodes', [])[:5]}")
    print("=" * 70)
    print()


async def main():
    print(f"Connecting to {DASHBOARD_URI} ...")
    async with websockets.connect(DASHBOARD_URI) as ws:
        first = json.loads(await ws.recv())
        print_view(first)

        # Narrow to the first real exam code offered, if any
        codes = first.get("snapshot", {}).get("filters", {}).get("examCodes", [])
        exam_code = next((c for c in codes if not c.lower().startswith("all")), None)
        if exam_code:
            print(f"Switching to examCode={exam_code}\n")
            await ws.send(json.dumps({"filters": {"examCode": exam_code}}))
            print_view(json.loads(await ws.recv()))

        await ws.send("ping")
        print(f"[PING] {await ws.recv()}")

        print("\nListening for pushes (Ctrl+C to stop)...\n")
        while True:
            raw = await ws.recv()
            print_view(json.loads(raw))


if __name__ == "__main__":
    asyncio.run(main())
