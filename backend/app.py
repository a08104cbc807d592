from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
import logging
import re
from urllib.parse import quote

from config import Config

# Configure logging
logging.basicConfig(level=getattr(logging, Config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

from schemas.flow_graph import FlowGraph
from services.bpmn_export_service import BpmnExportService, BpmnExportError
from translators.bpmn_translator import BpmnTranslator

# Initialize services
bpmn_translator = BpmnTranslator(
    exporter=Config.EXPORTER_NAME,
    exporter_version=Config.EXPORTER_VERSION,
    execution_platform=Config.EXECUTION_PLATFORM,
    execution_platform_version=Config.EXECUTION_PLATFORM_VERSION,
)
bpmn_export_service = BpmnExportService(bpmn_translator, process_name=Config.PROCESS_NAME)


# Lifespan event handler
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up Flow BPMN Exporter API...")
    yield
    logger.info("Shutting down Flow BPMN Exporter API...")

app = FastAPI(
    title="Flow BPMN Exporter",
    version="1.0.0",
    lifespan=lifespan,
)

logger.info(f"CORS enabled for origins: {Config.CORS_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
    max_age=3600,
)


def content_disposition(filename: str) -> str:
    """
    Attachment header value for a download name.

    Quotes and line breaks are dropped; non-ASCII names get an ASCII
    fallback plus an RFC 5987 filename* parameter.
    """
    name = re.sub(r'["\r\n]', "", filename)
    fallback = "".join(c if 32 <= ord(c) < 127 else "_" for c in name)
    if fallback == name:
        return f'attachment; filename="{name}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(name, safe='')}"


@app.get("/")
async def root():
    return {"message": "Flow BPMN Exporter API"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

@app.post("/api/export/bpmn")
async def export_bpmn(
    graph: FlowGraph,
    filename: Optional[str] = Query(None, description="Suggested download filename"),
):
    """Compile the editor graph to BPMN 2.0 XML and return it as a file download"""
    try:
        logger.info(f"BPMN export requested: {len(graph.nodes)} nodes, {len(graph.edges)} edges")
        document = bpmn_export_service.export(graph, filename=filename)
        return Response(
            content=document.xml.encode("utf-8"),
            media_type=document.media_type,
            headers={"Content-Disposition": content_disposition(document.filename)},
        )
    except BpmnExportError as e:
        logger.warning(f"BPMN export rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error exporting BPMN: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"BPMN export failed: {str(e)}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=Config.PORT)
