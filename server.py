#!/usr/bin/env python3
import logging, os, webbrowser

import uvicorn

from app import DATA_FILE, app

HOST = os.getenv("HUB_HOST", "0.0.0.0")
PORT = int(os.getenv("HUB_PORT", "3000"))


def banner():
    print(f"""
========================================
      HUB PESSOAL RODANDO!
========================================

Acesse no navegador:
  http://localhost:{PORT}

Dados salvos em: {DATA_FILE}

Para acessar do CELULAR (mesma wifi):
  Descubra seu IP: ipconfig (no CMD)
  Acesse: http://SEU_IP:{PORT}

----------------------------------------
  Feche a aba do navegador para encerrar
  Ou pressione Ctrl+C
----------------------------------------
""")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    banner()
    if os.getenv("HUB_OPEN_BROWSER") == "1":
        webbrowser.open(f"http://localhost:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT, log_level="warning")
