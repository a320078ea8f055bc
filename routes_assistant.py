# routes_assistant.py
import asyncio
import json
import threading

from flask import Blueprint, request, jsonify, Response, current_app
from flask_sock import Sock
from simple_websocket import ConnectionClosed

from assistant import (
    generate_chatbot_response, synthesize_speech, voice_system_instruction, NO_KEY_CHAT,
)
from catalog import storefront_products
from services import get_backend, init_genai, load_settings
from voice import VoiceBridge, live_config

bp = Blueprint("assistant", __name__)
sock = Sock()

IMAGE_ONLY_PROMPT = "¿Qué productos de la tienda me recomiendas para esto?"
RECEIVE_TIMEOUT = 0.5  # seconds between checks for a finished bridge


def _parse_history(raw):
    if isinstance(raw, list):
        return raw
    try:
        history = json.loads(raw or "[]")
    except ValueError:
        return []
    return history if isinstance(history, list) else []


@bp.route('/chat', methods=['POST'])
def chat():
    image = None
    image_mime = "image/jpeg"
    if request.is_json:
        data = request.get_json(silent=True) or {}
        message = (data.get('message') or '').strip()
        history = _parse_history(data.get('history'))
    else:
        message = request.form.get('message', '').strip()
        history = _parse_history(request.form.get('history'))
        upload = request.files.get('image')
        if upload and upload.filename:
            image = upload.read()
            image_mime = upload.mimetype or image_mime

    if not message and not image:
        return jsonify({'error': 'Escribe un mensaje.'}), 400

    settings = load_settings()
    products = storefront_products(get_backend().list_products())
    reply = generate_chatbot_response(
        history, message or IMAGE_ONLY_PROMPT, products,
        image=image, image_mime=image_mime, store=settings['store_name'],
    )
    return jsonify({'reply': reply})


@bp.route('/speech', methods=['POST'])
def speech():
    data = request.get_json(silent=True) or request.form
    text = (data.get('text') or '').strip()
    if not text:
        return jsonify({'error': 'Nada que leer.'}), 400
    audio = synthesize_speech(text)
    if audio is None:
        return jsonify({'error': 'El audio no está disponible en este momento.'}), 503
    return Response(audio, mimetype='audio/wav')


class SocketPeer:
    """The browser end of a voice call, seen from the bridge. Binary frames in
    are float32 mic samples, binary frames out are float32 playback buffers,
    text frames are JSON events. The text frame "stop" ends the call."""

    def __init__(self, ws, receive_timeout=RECEIVE_TIMEOUT):
        self.ws = ws
        self.receive_timeout = receive_timeout
        self.closing = threading.Event()

    def read_frame(self):
        while not self.closing.is_set():
            try:
                data = self.ws.receive(timeout=self.receive_timeout)
            except ConnectionClosed:
                return None
            if data is None:
                continue
            if isinstance(data, str):
                if data == 'stop':
                    return None
                continue
            return data
        return None

    def send_json(self, event):
        self.ws.send(json.dumps(event))

    async def receive_frame(self):
        return await asyncio.to_thread(self.read_frame)

    async def send_audio(self, buffer):
        await asyncio.to_thread(self.ws.send, buffer.tobytes())

    async def send_event(self, event):
        await asyncio.to_thread(self.send_json, event)

    async def release_microphone(self):
        self.closing.set()
        await self.send_event({'type': 'closed'})


def run_voice_call(ws, client, model, config):
    peer = SocketPeer(ws)
    bridge = VoiceBridge(
        client, model, config,
        receive_frame=peer.receive_frame, send_audio=peer.send_audio,
        send_event=peer.send_event, release_microphone=peer.release_microphone,
    )
    asyncio.run(bridge.run())
    return bridge


@sock.route('/voice', bp=bp)
def voice(ws):
    """Browser <-> Gemini Live, see ``SocketPeer`` for the frame protocol."""
    client = init_genai()
    if client is None:
        ws.send(json.dumps({'type': 'error', 'message': NO_KEY_CHAT}))
        return

    settings = load_settings()
    products = storefront_products(get_backend().list_products())
    config = live_config(voice_system_instruction(products, settings['store_name']),
                         current_app.config['GEMINI_LIVE_VOICE'])
    run_voice_call(ws, client, current_app.config['GEMINI_LIVE_MODEL'], config)
