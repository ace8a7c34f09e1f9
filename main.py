import uvicorn

from vocabtrainer.config import settings

# --- Run Application ---
if __name__ == "__main__":
    uvicorn.run(
        "vocabtrainer.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
