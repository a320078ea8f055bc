"""Gemini-backed helpers: product copy, the shop chatbot and text-to-speech.

Every call returns a user-facing fallback (or None for audio) instead of
raising, so a broken key or an outage never takes a page down.
"""
import io
import wave

from flask import current_app
from google.genai import types

from services import init_genai

TTS_SAMPLE_RATE = 24000

DESCRIPTION_FALLBACK = "Error generating description. Please try again."
NO_KEY_DESCRIPTION = "API Key not configured. Please contact support."
CHAT_FALLBACK = "Lo siento, estoy teniendo problemas para conectarme. Por favor, intenta de nuevo más tarde."
NO_KEY_CHAT = "API Key no configurada. Por favor, contacta a soporte."

DESCRIPTION_PROMPT = """\
You are an expert copywriter for a baby store named "TODO BABY".
Your tone is warm, reassuring, and trustworthy, targeting new parents.
Write a short, appealing, and SEO-friendly product description (2-3 sentences) for the following product.
Do not use markdown or special formatting. Just output the plain text of the description.

Product Name: {name}
Category: {category}
"""

CHAT_INSTRUCTION = """\
Eres 'Laudith', una asistente amigable y experta de una tienda para bebés llamada '{store}'.
Tu objetivo es ayudar a los nuevos padres a encontrar los mejores productos para sus necesidades en nuestra tienda.
SOLAMENTE debes recomendar productos de la siguiente lista. No inventes productos.
Mantén tus respuestas útiles, concisas y tranquilizadoras.
Cuando recomiendes un producto, indica su nombre claramente.
Si el cliente comparte una foto, descríbela brevemente y sugiere productos de la lista relacionados.

Aquí está la lista de productos disponibles:
{products}
"""

VOICE_INSTRUCTION = CHAT_INSTRUCTION + """
Estás hablando por voz: responde con frases cortas y naturales, sin listas ni formato.
"""


def product_list(products):
    return "\n".join(f"- {p['name']} (Categoría: {p.get('category', '')})" for p in products)


def chat_instruction(products, store="TODO BABY"):
    return CHAT_INSTRUCTION.format(store=store, products=product_list(products))


def voice_system_instruction(products, store="TODO BABY"):
    return VOICE_INSTRUCTION.format(store=store, products=product_list(products))


def history_to_contents(history):
    """Chat log entries ({"role": "user"|"model", "text": ...}) to Gemini contents."""
    contents = []
    for entry in history or []:
        text = (entry.get("text") or "").strip()
        role = entry.get("role")
        if not text or role not in ("user", "model"):
            continue
        contents.append(types.Content(role=role, parts=[types.Part.from_text(text=text)]))
    return contents


def generate_product_description(name, category):
    client = init_genai()
    if client is None:
        return NO_KEY_DESCRIPTION
    try:
        response = client.models.generate_content(
            model=current_app.config["GEMINI_TEXT_MODEL"],
            contents=DESCRIPTION_PROMPT.format(name=name, category=category),
        )
        return (response.text or "").strip() or DESCRIPTION_FALLBACK
    except Exception as e:
        current_app.logger.exception(f"Error generating product description: {e}")
        return DESCRIPTION_FALLBACK


def generate_chatbot_response(history, message, products, image=None, image_mime="image/jpeg", store="TODO BABY"):
    """Reply to ``message`` given the earlier chat ``history``. ``image`` is raw
    bytes; when present the user turn carries it next to the text."""
    client = init_genai()
    if client is None:
        return NO_KEY_CHAT

    parts = []
    if image:
        parts.append(types.Part.from_bytes(data=image, mime_type=image_mime))
    parts.append(types.Part.from_text(text=message))
    contents = history_to_contents(history) + [types.Content(role="user", parts=parts)]

    try:
        response = client.models.generate_content(
            model=current_app.config["GEMINI_TEXT_MODEL"],
            contents=contents,
            config=types.GenerateContentConfig(system_instruction=chat_instruction(products, store)),
        )
        return (response.text or "").strip() or CHAT_FALLBACK
    except Exception as e:
        current_app.logger.exception(f"Error generating chatbot response: {e}")
        return CHAT_FALLBACK


def pcm_to_wav(pcm, sample_rate=TTS_SAMPLE_RATE):
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buf.getvalue()


def synthesize_speech(text):
    """WAV bytes for ``text``, or None when the service can't produce audio."""
    client = init_genai()
    if client is None or not (text or "").strip():
        return None
    try:
        response = client.models.generate_content(
            model=current_app.config["GEMINI_TTS_MODEL"],
            contents=text,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(
                            voice_name=current_app.config["GEMINI_TTS_VOICE"],
                        )
                    )
                ),
            ),
        )
        pcm = response.candidates[0].content.parts[0].inline_data.data
    except Exception as e:
        current_app.logger.exception(f"Error generating speech: {e}")
        return None
    return pcm_to_wav(pcm) if pcm else None
