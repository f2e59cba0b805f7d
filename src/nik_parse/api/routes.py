"""
FastAPI routes for the NIK-PARSE service.

Provides the NIK parse endpoint, the visitor counter API and the web form.
"""

import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from nik_parse import __version__
from nik_parse.api.middleware import RequestLoggingMiddleware, get_client_ip
from nik_parse.api.models import (
    HealthResponse,
    NIKData,
    NIKErrorResponse,
    NIKParseRequest,
    NIKSuccessResponse,
    VisitorStatsResponse,
    VisitRequest,
    VisitResponse,
)
from nik_parse.config.region_loader import get_region_path, load_regions_from_yaml
from nik_parse.core.decoder import NIKDecoder, ParseFailure, ParseResult
from nik_parse.logging.setup import get_logger, setup_logging
from nik_parse.metrics.collectors import DECODE_RESULTS, REGION_ENTRIES
from nik_parse.storage.visitor_store import (
    DEFAULT_RECENT_LIMIT,
    MemoryVisitorStore,
    VisitorStore,
)

# Initialize logging
setup_logging()
logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Terjadi kesalahan saat memproses NIK"


# Process-wide instances, created on first use
_decoder: Optional[NIKDecoder] = None
_visitor_store: Optional[VisitorStore] = None


def get_decoder() -> NIKDecoder:
    """Get or create the decoder, loading the region table on first use."""
    global _decoder

    if _decoder is None:
        region_path = get_region_path()
        regions = load_regions_from_yaml(region_path)
        REGION_ENTRIES.set(len(regions))

        _decoder = NIKDecoder(
            regions,
            strict_region=os.getenv("NIK_PARSE_STRICT_REGION", "true").lower() == "true",
        )
        logger.info(
            "Region table loaded",
            extra={
                "event": "regions_loaded",
                "path": str(region_path),
                "provinces": regions.province_count,
                "regencies": regions.regency_count,
                "districts": len(regions),
                "strict_region": _decoder.strict_region,
            },
        )

    return _decoder


def get_visitor_store() -> VisitorStore:
    """Get or create the visitor store."""
    global _visitor_store

    if _visitor_store is None:
        _visitor_store = MemoryVisitorStore(
            recent_limit=int(
                os.getenv("NIK_PARSE_RECENT_VISITORS", str(DEFAULT_RECENT_LIMIT))
            ),
        )

    return _visitor_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting NIK-PARSE service", extra={"version": __version__})
    get_decoder()
    yield
    logger.info("Shutting down NIK-PARSE service")
    if _visitor_store is not None:
        _visitor_store.clear()


app = FastAPI(
    title="NIK-PARSE",
    description="Parse and validate Indonesian national identity numbers (NIK)",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP exceptions in the API's status/pesan shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content=NIKErrorResponse(pesan=str(exc.detail)).model_dump(),
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(decoder: NIKDecoder = Depends(get_decoder)):
    """Health check endpoint."""
    return HealthResponse(status="ok", version=__version__, regions=len(decoder.regions))


@app.get("/metrics", tags=["Monitoring"])
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


# ============================================================================
# NIK Parse Endpoints
# ============================================================================


def _render_result(result: ParseResult) -> JSONResponse:
    """Convert a decode result into the JSON response."""
    if isinstance(result, ParseFailure):
        DECODE_RESULTS.labels(result=result.reason.value).inc()
        logger.info(
            "NIK rejected",
            extra={"event": "nik_rejected", "reason": result.reason.value},
        )
        return JSONResponse(
            status_code=400,
            content=NIKErrorResponse.from_failure(result).model_dump(),
        )

    identity = result.identity
    DECODE_RESULTS.labels(result="success").inc()
    logger.info(
        "NIK decoded",
        extra={"event": "nik_decoded", "region_code": identity.region.code},
    )
    body = NIKSuccessResponse(pesan=result.message, data=NIKData.from_identity(identity))
    return JSONResponse(status_code=200, content=body.model_dump())


def _generic_error() -> JSONResponse:
    DECODE_RESULTS.labels(result="malformed_request").inc()
    return JSONResponse(
        status_code=400,
        content=NIKErrorResponse(pesan=GENERIC_ERROR_MESSAGE).model_dump(),
    )


@app.get("/api/nik/parse", tags=["NIK"])
async def parse_nik_query(
    nik: Optional[str] = Query(None, description="Candidate NIK, 16 digits"),
    decoder: NIKDecoder = Depends(get_decoder),
):
    """Parse a NIK passed as a query parameter.

    Example: ``GET /api/nik/parse?nik=3201011509900001``
    """
    return _render_result(decoder.decode(nik))


@app.post("/api/nik/parse", tags=["NIK"])
async def parse_nik_body(
    request: Request,
    decoder: NIKDecoder = Depends(get_decoder),
):
    """Parse a NIK passed in a JSON body: ``{"nik": "3201011509900001"}``.

    Unparsable bodies produce a generic error instead of a validation
    error payload.
    """
    try:
        body = NIKParseRequest.model_validate(await request.json())
    except ValueError as e:
        logger.warning(
            "Malformed parse request",
            extra={"event": "malformed_request", "error": type(e).__name__},
        )
        return _generic_error()

    return _render_result(decoder.decode(body.nik))


# ============================================================================
# Visitor Endpoints
# ============================================================================


@app.get("/api/visitors", response_model=VisitorStatsResponse, tags=["Visitors"])
async def visitor_stats(store: VisitorStore = Depends(get_visitor_store)):
    """Return total, unique and today's visitor counts plus the latest visits."""
    return store.stats().to_dict()


@app.post("/api/visitors", response_model=VisitResponse, tags=["Visitors"])
async def record_visit(
    request: Request,
    store: VisitorStore = Depends(get_visitor_store),
):
    """Record a page view for the calling client."""
    try:
        body = VisitRequest.model_validate(await request.json())
    except ValueError:
        return JSONResponse(status_code=400, content={"success": False})

    store.record(
        ip=get_client_ip(request),
        user_agent=request.headers.get("user-agent") or "unknown",
        page=body.page or "/",
    )
    return VisitResponse(success=True)


# ============================================================================
# Web UI
# ============================================================================

UI_HTML = """<!DOCTYPE html>
<html lang="id">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>NIK PARSE</title>
    <style>
        * { box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif;
            max-width: 900px;
            margin: 0 auto;
            padding: 20px;
            background: #eef2ff;
            color: #333;
        }
        h1 {
            color: #1a1a2e;
            border-bottom: 2px solid #4a60d9;
            padding-bottom: 10px;
        }
        .container {
            background: white;
            border-radius: 8px;
            padding: 24px;
            box-shadow: 0 2px 8px rgba(0,0,0,0.1);
            margin-bottom: 20px;
        }
        .status-bar {
            display: flex;
            justify-content: flex-end;
            gap: 16px;
            font-size: 13px;
            color: #555;
        }
        label {
            display: block;
            font-weight: 600;
            margin-bottom: 8px;
            color: #444;
        }
        input {
            width: 100%;
            padding: 10px 12px;
            border: 1px solid #ddd;
            border-radius: 6px;
            font-size: 16px;
            font-family: "SF Mono", Monaco, monospace;
        }
        button {
            margin-top: 16px;
            padding: 10px 24px;
            border: none;
            border-radius: 6px;
            font-size: 14px;
            font-weight: 600;
            cursor: pointer;
            background: #4a60d9;
            color: white;
        }
        button:disabled { opacity: 0.5; cursor: default; }
        table { width: 100%; border-collapse: collapse; }
        th, td {
            padding: 8px 12px;
            text-align: left;
            border-bottom: 1px solid #eee;
        }
        th { width: 40%; color: #666; font-weight: 600; }
        .error { color: #dc3545; font-weight: 600; }
        .hidden { display: none; }
        .version {
            text-align: center;
            color: #888;
            font-size: 12px;
        }
    </style>
</head>
<body>
    <div class="status-bar">
        <span>Hari ini: <b id="visitors-today">0</b></span>
        <span>Total: <b id="visitors-total">0</b></span>
    </div>

    <h1>NIK PARSE</h1>
    <p>Parse dan validasi Nomor Induk Kependudukan (NIK) Indonesia.
       NIK tidak menyimpan nama; hanya jenis kelamin, tanggal lahir dan wilayah.</p>

    <div class="container">
        <form id="form">
            <label for="nik">Nomor Induk Kependudukan (NIK)</label>
            <input id="nik" type="text" inputmode="numeric" maxlength="16"
                   placeholder="Masukkan 16 digit NIK" autocomplete="off">
            <button id="submit" type="submit" disabled>Parse NIK</button>
        </form>
    </div>

    <div id="result" class="container hidden"></div>

    <div class="version">NIK-PARSE v""" + __version__ + """</div>

    <script>
        const input = document.getElementById('nik');
        const submit = document.getElementById('submit');
        const result = document.getElementById('result');

        input.addEventListener('input', () => {
            input.value = input.value.replace(/\\D/g, '').slice(0, 16);
            submit.disabled = input.value.length !== 16;
        });

        function escapeHtml(text) {
            const div = document.createElement('div');
            div.textContent = text;
            return div.innerHTML;
        }

        function row(label, value) {
            return `<tr><th>${label}</th><td>${escapeHtml(value)}</td></tr>`;
        }

        document.getElementById('form').addEventListener('submit', async (e) => {
            e.preventDefault();
            submit.disabled = true;
            submit.textContent = 'Memproses...';
            try {
                const res = await fetch('/api/nik/parse', {
                    method: 'POST',
                    headers: {'Content-Type': 'application/json'},
                    body: JSON.stringify({nik: input.value})
                });
                const body = await res.json();
                if (body.status === 'success') {
                    const d = body.data, t = d.tambahan;
                    result.innerHTML = '<table>' +
                        row('NIK', d.nik) + row('Jenis Kelamin', d.kelamin) +
                        row('Provinsi', d.provinsi) + row('Kabupaten/Kota', d.kotakab) +
                        row('Kecamatan', d.kecamatan) + row('Kode Pos', t.kodepos) +
                        row('Tanggal Lahir', d.lahir) + row('Tahun Lahir', t.tahunLahir) +
                        row('Usia', t.usia) + row('Ulang Tahun', t.ultah) +
                        row('Hari Pasaran', t.pasaran) + row('Zodiak', t.zodiak) +
                        row('Kode Unik', d.uniqcode) + row('Tempat Lahir (Provinsi)', t.tempatLahir) +
                        '</table>';
                } else {
                    result.innerHTML = `<p class="error">${escapeHtml(body.pesan)}</p>`;
                }
            } catch (err) {
                result.innerHTML = '<p class="error">Terjadi kesalahan saat memproses NIK</p>';
            } finally {
                result.classList.remove('hidden');
                submit.textContent = 'Parse NIK';
                submit.disabled = input.value.length !== 16;
            }
        });

        async function refreshVisitors() {
            try {
                const res = await fetch('/api/visitors');
                const stats = await res.json();
                document.getElementById('visitors-today').textContent = stats.today;
                document.getElementById('visitors-total').textContent = stats.total;
            } catch (err) {
                console.error('Failed to fetch visitor stats:', err);
            }
        }

        fetch('/api/visitors', {
            method: 'POST',
            headers: {'Content-Type': 'application/json'},
            body: JSON.stringify({page: window.location.pathname})
        }).finally(refreshVisitors);
        setInterval(refreshVisitors, 30000);
    </script>
</body>
</html>
"""


@app.get("/", response_class=HTMLResponse, tags=["UI"])
async def ui_page():
    """Serve the NIK parse form."""
    return UI_HTML
