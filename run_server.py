import logging

import uvicorn

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    print("Starting Judge Clicker Share Server...")
    print("Docs available at: http://localhost:8000/docs")

    uvicorn.run(
        "clicker.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
