# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                 import konsol
from Core                import Request, JSONResponse, UploadFile, File
from Settings            import UPLOAD_PREFIX
from .                   import wp_router
from fastapi.concurrency import run_in_threadpool
from pathlib             import Path, PurePath
import os

CHUNK_SIZE = 1024 * 1024

async def _kaydet(videoFile: UploadFile, gecici: Path):
    dosya = await run_in_threadpool(open, gecici, "wb")
    try:
        while chunk := await videoFile.read(CHUNK_SIZE):
            await run_in_threadpool(dosya.write, chunk)
    finally:
        await run_in_threadpool(dosya.close)

def _yerlestir(upload_dir: Path, gecici: Path, hedef: Path):
    os.replace(gecici, hedef)

    # Tek oda, tek film: eski uzantılı kopyaları temizle
    for eski in upload_dir.glob(f"{UPLOAD_PREFIX}*"):
        if eski != hedef:
            eski.unlink(missing_ok=True)

@wp_router.post("/upload")
async def upload_video(request: Request, videoFile: UploadFile | None = File(None)):
    """Filmi kaydet, oynatım durumunu sıfırla ve herkese duyur"""
    if videoFile is None or not videoFile.filename:
        return JSONResponse(status_code=400, content={"detail": "No file uploaded."})

    manager    = request.app.state.watch_party
    upload_dir = Path(manager.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)

    uzanti = PurePath(videoFile.filename).suffix
    hedef  = upload_dir / f"{UPLOAD_PREFIX}{uzanti}"
    gecici = upload_dir / f".{UPLOAD_PREFIX}{uzanti}.part"

    # Yazma yarıda kalırsa mevcut film yerinde kalır
    try:
        await _kaydet(videoFile, gecici)
    except Exception:
        gecici.unlink(missing_ok=True)
        raise

    await run_in_threadpool(_yerlestir, upload_dir, gecici, hedef)

    video_url = f"/uploads/{hedef.name}"
    konsol.log(f"[green]🎬 Film yüklendi:[/] {videoFile.filename} » {video_url}")

    await manager.media_uploaded(video_url, videoFile.filename)

    return {"message": "File uploaded successfully", "url": video_url}
