"""
Aplicação principal FastAPI do AgroInsight Backend
"""
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.endpoints import router as api_router
from app.core.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Criar aplicação FastAPI
app = FastAPI(
    title=settings.app_name,
    description="API para análise estatística e diagnóstico de datasets zootécnicos",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Incluir rotas da API
app.include_router(api_router, prefix="/api/v1", tags=["AgroInsight"])


# Endpoint raiz
@app.get("/")
async def root():
    """Endpoint raiz da API"""
    return {
        "message": settings.app_name,
        "version": "0.1.0",
        "description": "API para análise estatística e diagnóstico de datasets zootécnicos",
        "docs": "/docs",
        "redoc": "/redoc",
        "endpoints": {
            "analise": "/api/v1/analise",
            "upload_csv": "/api/v1/analise/upload-csv",
            "diagnostico": "/api/v1/analise/{analysis_id}/diagnostico",
            "referencias": "/api/v1/referencias-zootecnicas",
            "dados_teste": "/api/v1/dados-teste",
            "health": "/api/v1/health"
        }
    }


# Handler global de exceções
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": "Erro na requisição",
            "error": exc.detail
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logger.error(f"Erro não tratado: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Erro interno do servidor",
            "error": str(exc)
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
