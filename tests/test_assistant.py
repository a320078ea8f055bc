"""Tests for the Gemini helpers and the /assistant HTTP endpoints."""

import io

import pytest

from assistant import (
    CHAT_FALLBACK, DESCRIPTION_FALLBACK, NO_KEY_CHAT, NO_KEY_DESCRIPTION,
    generate_chatbot_response, generate_product_description, history_to_contents,
    synthesize_speech,
)

PRODUCTS = [
    {"id": 1, "name": "Termo", "category": "Para la Clínica"},
    {"id": 2, "name": "Coche", "category": "Mi llegada a casa"},
]


@pytest.fixture
def no_key(app):
    app.config["GEMINI_API_KEY"] = None
    app.extensions.pop("genai_client", None)


class TestDescription:

    def test_reply_is_stripped(self, app, genai):
        genai.models.text = "\n Un termo cálido. \n"
        with app.app_context():
            assert generate_product_description("Termo", "Para la Clínica") == "Un termo cálido."
        assert genai.models.calls[0]["model"] == app.config["GEMINI_TEXT_MODEL"]

    def test_service_error_falls_back(self, app, genai):
        genai.models.error = RuntimeError("quota exceeded")
        with app.app_context():
            assert generate_product_description("Termo", "Aseo") == DESCRIPTION_FALLBACK

    def test_missing_key(self, app, no_key):
        with app.app_context():
            assert generate_product_description("Termo", "Aseo") == NO_KEY_DESCRIPTION


class TestChatbot:

    def test_history_skips_blank_and_unknown_roles(self):
        contents = history_to_contents([
            {"role": "user", "text": "Hola"},
            {"role": "model", "text": "¡Hola! ¿En qué te ayudo?"},
            {"role": "system", "text": "ignorar"},
            {"role": "user", "text": "   "},
        ])
        assert [c.role for c in contents] == ["user", "model"]
        assert contents[1].parts[0].text == "¡Hola! ¿En qué te ayudo?"

    def test_catalogue_goes_into_system_instruction(self, app, genai):
        genai.models.text = "Te recomiendo el Termo."
        with app.app_context():
            reply = generate_chatbot_response(
                [{"role": "user", "text": "Hola"}, {"role": "model", "text": "¡Hola!"}],
                "¿Qué llevo a la clínica?", PRODUCTS, store="Todo Baby Rio",
            )
        assert reply == "Te recomiendo el Termo."

        call = genai.models.calls[0]
        instruction = str(call["config"].system_instruction)
        assert "Laudith" in instruction
        assert "Todo Baby Rio" in instruction
        assert "- Termo (Categoría: Para la Clínica)" in instruction
        assert len(call["contents"]) == 3
        assert call["contents"][-1].parts[-1].text == "¿Qué llevo a la clínica?"

    def test_image_travels_with_the_message(self, app, genai):
        with app.app_context():
            generate_chatbot_response([], "¿Qué es esto?", PRODUCTS, image=b"jpeg-bytes", image_mime="image/png")
        parts = genai.models.calls[0]["contents"][-1].parts
        assert parts[0].inline_data.data == b"jpeg-bytes"
        assert parts[0].inline_data.mime_type == "image/png"
        assert parts[1].text == "¿Qué es esto?"

    def test_service_error_falls_back(self, app, genai):
        genai.models.error = RuntimeError("network down")
        with app.app_context():
            assert generate_chatbot_response([], "Hola", PRODUCTS) == CHAT_FALLBACK

    def test_missing_key(self, app, no_key):
        with app.app_context():
            assert generate_chatbot_response([], "Hola", PRODUCTS) == NO_KEY_CHAT


class TestSpeech:

    def test_pcm_is_wrapped_as_wav(self, app, genai):
        genai.models.audio = b"\x00\x01" * 240
        with app.app_context():
            audio = synthesize_speech("Hola mamá")
        assert audio[:4] == b"RIFF"
        assert audio[8:12] == b"WAVE"
        assert genai.models.calls[0]["model"] == app.config["GEMINI_TTS_MODEL"]

    def test_blank_text_makes_no_call(self, app, genai):
        with app.app_context():
            assert synthesize_speech("  ") is None
        assert genai.models.calls == []

    def test_service_error_is_none(self, app, genai):
        genai.models.error = RuntimeError("boom")
        with app.app_context():
            assert synthesize_speech("Hola") is None


class TestRoutes:

    def test_chat_json(self, client, genai, products):
        genai.models.text = "¡Claro! El Termo es ideal."
        res = client.post("/assistant/chat", json={
            "message": "Busco un termo",
            "history": [{"role": "model", "text": "¡Hola! Soy Laudith."}],
        })
        assert res.status_code == 200
        assert res.get_json() == {"reply": "¡Claro! El Termo es ideal."}
        assert "Termo" in str(genai.models.calls[0]["config"].system_instruction)

    def test_chat_with_photo_only(self, client, genai):
        res = client.post("/assistant/chat", data={
            "history": "[]",
            "image": (io.BytesIO(b"jpeg-bytes"), "bebe.jpg", "image/jpeg"),
        }, content_type="multipart/form-data")
        assert res.status_code == 200
        parts = genai.models.calls[0]["contents"][-1].parts
        assert parts[0].inline_data.data == b"jpeg-bytes"
        assert "recomiendas" in parts[1].text

    def test_chat_needs_message_or_photo(self, client, genai):
        res = client.post("/assistant/chat", json={"message": "  "})
        assert res.status_code == 400
        assert "error" in res.get_json()
        assert genai.models.calls == []

    def test_speech_returns_wav(self, client, genai):
        genai.models.audio = b"\x00\x00" * 100
        res = client.post("/assistant/speech", json={"text": "Hola"})
        assert res.status_code == 200
        assert res.mimetype == "audio/wav"
        assert res.data[:4] == b"RIFF"

    def test_speech_unavailable(self, client, genai):
        genai.models.error = RuntimeError("boom")
        res = client.post("/assistant/speech", json={"text": "Hola"})
        assert res.status_code == 503

    def test_speech_needs_text(self, client, genai):
        assert client.post("/assistant/speech", json={"text": ""}).status_code == 400

    def test_unknown_assistant_path_is_json(self, client):
        res = client.get("/assistant/nope")
        assert res.status_code == 404
        assert res.get_json() == {"error": "Página no encontrada 😕"}
