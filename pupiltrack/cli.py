from __future__ import annotations
import typer, asyncio, logging, time, cv2
from rich import print
from pathlib import Path
from typing import List, Optional
from .config.params import load_params, dump_params
from .eye.pupil import PupilTracker
from .debug.tiles import TileSink, annotate
from .io.camera import frames, read_image, load_mask
from .runtime.events import PupilEvent, ws_broadcast

app = typer.Typer(add_completion=False, help="PupilTrack CLI: canny-edge pupil ellipse tracking")
log = logging.getLogger("pupiltrack")

def _setup_logging(verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

def _tracker(config: Optional[Path], mask: Optional[Path], width: int, height: int, debug: bool):
    params = load_params(config)
    if debug:
        params = params.with_changes(debug_capture=True)
    tracker = PupilTracker(params, frame_size=(width, height), sink=TileSink() if debug else None)
    if mask is not None:
        tracker.set_roi_mask(load_mask(mask))
    return tracker

@app.command()
def track(source: str = typer.Option("0", help="camera index or video file"),
          width: int = 640, height: int = 480,
          config: Optional[Path] = typer.Option(None, help="YAML file with tracker tunables"),
          mask: Optional[Path] = typer.Option(None, help="region-of-interest mask image"),
          display: bool = typer.Option(True, help="show annotated frames"),
          flip: bool = typer.Option(False, help="mirror the displayed frame"),
          debug: bool = typer.Option(False, help="show the pipeline's intermediate images"),
          ws: bool = typer.Option(False, help="broadcast results over WebSocket"),
          port: int = 8765, verbose: bool = False):
    """
    Track the pupil on a live camera or video; prints one JSON line per frame.
    """
    _setup_logging(verbose)
    try:
        tracker = _tracker(config, mask, width, height, debug)
    except FileNotFoundError as e:
        print(f"[red]{e}[/red]"); raise typer.Exit(1)
    queue: "asyncio.Queue[str]" = asyncio.Queue()

    async def producer():
        try:
            for f in frames(source, width, height):
                t0 = time.perf_counter()
                if tracker.sink is not None: tracker.sink.clear()
                ok = tracker.find_pupil(f["image"])
                proc_ms = (time.perf_counter() - t0) * 1000
                ev = PupilEvent.build(ok, tracker.result, frame=f["meta"]["index"], source=source, proc_ms=proc_ms)
                line = ev.model_dump_json()
                typer.echo(line)
                if ws: await queue.put(line); await asyncio.sleep(0)
                if display:
                    out = annotate(f["image"], tracker.result)
                    cv2.imshow("pupiltrack", cv2.flip(out, 1) if flip else out)
                    if debug:
                        cv2.imshow("pupiltrack debug", tracker.sink.mosaic(tracker.frame_size))
                    # press q to quit
                    if cv2.waitKey(1) & 0xFF == ord('q'):
                        break
                log.debug("processing time %.2f ms, center %s", proc_ms, tracker.ellipse_center())
        finally:
            if display: cv2.destroyAllWindows()

    async def main():
        if ws:
            bcast = asyncio.create_task(ws_broadcast(queue, "0.0.0.0", port))
            try:
                await producer()
            finally:
                bcast.cancel()
        else:
            await producer()

    try:
        asyncio.run(main())
    except RuntimeError as e:
        print(f"[red]{e}[/red]"); raise typer.Exit(1)

@app.command()
def image(images: List[Path] = typer.Argument(..., help="eye images"),
          config: Optional[Path] = None, mask: Optional[Path] = None,
          out: Optional[Path] = typer.Option(None, help="directory for annotated copies"),
          verbose: bool = False):
    """
    Run the tracker on still images; prints one JSON line per image.
    """
    _setup_logging(verbose)
    failed = False
    for i, path in enumerate(images):
        try:
            frame = read_image(path)
            # each image is its own session, sized to that image
            tracker = _tracker(config, mask, frame.shape[1], frame.shape[0], False)
        except FileNotFoundError as e:
            print(f"[red]{e}[/red]"); failed = True
            continue
        t0 = time.perf_counter()
        ok = tracker.find_pupil(frame)
        ev = PupilEvent.build(ok, tracker.result, frame=i, source=str(path),
                              proc_ms=(time.perf_counter() - t0) * 1000)
        typer.echo(ev.model_dump_json())
        if out is not None:
            out.mkdir(parents=True, exist_ok=True)
            cv2.imwrite(str(out / path.name), annotate(frame, tracker.result))
    if failed:
        raise typer.Exit(1)

@app.command()
def params(config: Optional[Path] = typer.Option(None, help="YAML file with tracker tunables")):
    """
    Print the effective tunables as YAML.
    """
    typer.echo(dump_params(load_params(config)), nl=False)

if __name__ == "__main__":
    app()
