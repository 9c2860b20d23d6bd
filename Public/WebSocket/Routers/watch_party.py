# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from fastapi  import WebSocket, WebSocketDisconnect
from Settings import MAX_PAYLOAD
from .        import wss_router
from ..Libs   import MessageHandler
import json, time

# Sinyal ve oynatım niyetleri hız sınırına takılmaz, hepsi sırayla işlenir
UNLIMITED_OPS   = {"signal", "play", "pause", "seek"}
HIGH_FREQ_OPS   = {"ping"}
HIGH_FREQ_LIMIT = 30  # mesaj/sn
GENERAL_LIMIT   = 10  # mesaj/sn

@wss_router.websocket("/watch_party")
async def watch_party_websocket(websocket: WebSocket):
    await websocket.accept()
    handler = MessageHandler(websocket, websocket.app.state.watch_party)

    # (takes_msg, fn)
    handlers = {
        "ping"        : (True,  handler.handle_ping),
        "syncRequest" : (False, handler.handle_sync_request),

        "play"        : (True,  handler.handle_play),
        "pause"       : (True,  handler.handle_pause),
        "seek"        : (True,  handler.handle_seek),

        "becomeHost"  : (False, handler.handle_become_host),
        "signal"      : (True,  handler.handle_signal),

        "chatMessage" : (True,  handler.handle_chat),
    }

    # Rate limiting
    general_msg_count = 0
    general_last_time = time.perf_counter()

    high_msg_count = 0
    high_last_time = time.perf_counter()

    try:
        await handler.handle_connect()

        while True:
            raw = await websocket.receive_text()

            # 1. Flood Control: Payload Size
            if len(raw.encode("utf-8")) > MAX_PAYLOAD:
                await handler.send_error("Mesaj boyutu çok büyük")
                continue

            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                await handler.send_error("Geçersiz JSON formatı")
                continue

            if not isinstance(msg, dict):
                continue

            t = msg.get("type")
            if not t:
                continue

            # 2. Flood Control: Rate Limit (Dual Bucket)
            now = time.perf_counter()

            if t in UNLIMITED_OPS:
                pass
            elif t in HIGH_FREQ_OPS:
                if now - high_last_time > 1.0:
                    high_msg_count = 0
                    high_last_time = now

                high_msg_count += 1
                if high_msg_count > HIGH_FREQ_LIMIT:
                    continue
            else:
                if now - general_last_time > 1.0:
                    general_msg_count = 0
                    general_last_time = now

                general_msg_count += 1
                if general_msg_count > GENERAL_LIMIT:
                    await handler.send_error("Çok hızlı işlem yapıyorsunuz")
                    continue

            entry = handlers.get(t)
            if not entry:
                continue

            takes_msg, fn = entry
            await (fn(msg) if takes_msg else fn())

    except WebSocketDisconnect:
        pass
    except Exception as e:
        konsol.log(f"[red]WebSocket Error:[/] {e}")
    finally:
        await handler.handle_disconnect()
