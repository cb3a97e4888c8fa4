from __future__ import annotations

import os

import uvicorn

from hocaim.backend import constants


def main() -> None:
	port = int(os.environ.get("PORT", str(constants.DEFAULT_PORT)))
	uvicorn.run("hocaim.backend.main:app", host="0.0.0.0", port=port, log_level="info")


if __name__ == "__main__":
	main()
