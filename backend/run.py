import os
from app import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Socket.IO server so the round timer and websockets work in dev
    port = int(os.environ.get('PORT', 3000))
    socketio.run(app, host=os.environ.get('HOST', '127.0.0.1'), port=port, debug=True, use_reloader=False)
