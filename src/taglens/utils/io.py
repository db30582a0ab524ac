# TagLens — IO helpers (directories, text files)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import os


def ensure_dirs(*paths: str) -> None:
	for p in paths:
		if p:
			os.makedirs(p, exist_ok=True)


def write_text(path: str, text: str) -> str:
	ensure_dirs(os.path.dirname(path))
	with open(path, "w", encoding="utf-8", newline="") as f:
		f.write(text)
	return path
