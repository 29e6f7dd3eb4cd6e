import os

def ensure_directories(*paths: str):
    for path in paths:
        os.makedirs(path, exist_ok=True)

def write_bytes(path: str, data: bytes):
    """
    一時ファイルに書き込んでから置き換える。
    書き込み途中で失敗した場合に中途半端なファイルを残さないため
    """
    tmp_path = f"{path}.part"
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

def remove_file(path: str) -> bool:
    """ファイルを削除する。存在しない場合は False を返す (エラーにはしない)"""
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return False
