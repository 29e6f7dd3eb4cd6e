import os
import uvicorn

if __name__ == "__main__":
    # 設定の読み込みと環境変数のセットアップ
    # ロガーがインポートされる前に行い、ログ出力先を確定させる
    from config import settings
    settings.setup_environment()

    # アプリケーションデータディレクトリの確保
    os.makedirs(settings.USER_DATA_DIR, exist_ok=True)

    from main import app

    port = int(os.environ.get("PORT", settings.PORT))

    print(f"Starting Tunebox Backend Server on http://{settings.HOST}:{port} ...")
    print(f"Upload Directory: {settings.UPLOAD_DIR}")
    print(f"Admin user: {settings.ADMIN_USERNAME}")

    uvicorn.run(app, host=settings.HOST, port=port, reload=False, workers=1)
