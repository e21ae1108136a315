#!/usr/bin/env python3
from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
import aiofiles, logging, uuid
from pathlib import Path
from typing import Optional

from recipe_core.config import configure_logging, get_settings
from recipe_core.errors import MalformedRootError, OutputIOError, ParseError
from recipe_core.pipeline import convert_file
from recipe_core.streaming_converter import StreamingConverter

app = FastAPI(title="recipe-lite OP2")
logger = logging.getLogger(__name__)

conversion_counter = Counter("recipe_conversions_total", "Conversion requests by outcome", ["outcome"])
upload_bytes = Counter("recipe_upload_bytes_total", "Bytes received in uploads")
process_duration = Histogram("recipe_convert_seconds", "Time spent converting")

DOWNLOAD_NAME = "converted_output.json"


@app.get("/", tags=["ops"], response_class=PlainTextResponse)
def banner():
    return "JSON Streaming Converter API is running."


@app.get("/health", tags=["ops"])
def health():
    return {"status": "healthy"}


@app.get("/metrics", tags=["ops"])
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def cleanup(*paths: Path):
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"could not remove {path}: {e}")


async def spool_upload(upload: UploadFile, dest: Path, chunk_size: int) -> int:
    total = 0
    async with aiofiles.open(dest, "wb") as out:
        while True:
            chunk = await upload.read(chunk_size)
            if not chunk:
                break
            await out.write(chunk)
            total += len(chunk)
    return total


@app.post("/convert", tags=["convert"])
async def convert(json_file: Optional[UploadFile] = File(None, alias="jsonFile")):
    if json_file is None:
        conversion_counter.labels(outcome="rejected").inc()
        raise HTTPException(status_code=400, detail="No file uploaded.")

    settings = get_settings()
    token = uuid.uuid4().hex
    input_path = settings.upload_dir / token
    output_path = settings.output_dir / f"{token}.out.json"
    try:
        settings.upload_dir.mkdir(parents=True, exist_ok=True)
        upload_bytes.inc(await spool_upload(json_file, input_path, settings.upload_chunk_bytes))
        with process_duration.time():
            converter = StreamingConverter(progress_every=settings.progress_every)
            result = await run_in_threadpool(convert_file, input_path, output_path, converter)
        async with aiofiles.open(output_path, "rb") as f:
            payload = await f.read()
    except (MalformedRootError, ParseError) as e:
        conversion_counter.labels(outcome="invalid").inc()
        logger.warning(f"rejected {json_file.filename}: {e}")
        raise HTTPException(status_code=400, detail=f"Conversion failed: {e}")
    except (OutputIOError, OSError) as e:
        conversion_counter.labels(outcome="error").inc()
        logger.error(f"conversion of {json_file.filename} failed: {e}")
        raise HTTPException(status_code=500, detail=f"Conversion failed: {e}")
    finally:
        await json_file.close()
        cleanup(input_path, output_path)

    conversion_counter.labels(outcome="success").inc()
    logger.info(f"converted {json_file.filename}: {len(result.index)} entries, {len(payload)} bytes")
    return Response(
        payload,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_NAME}"'},
    )


if __name__ == "__main__":
    import uvicorn
    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
