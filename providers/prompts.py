TRANSLATION_SYSTEM_PROMPT = (
    "You are a professional software localization translator. "
    "Output only the translated text, nothing else."
)

TRANSLATION_USER_PROMPT_TEMPLATE = (
    "Translate the following text from {source_lang} to {target_lang}.\n"
    "IMPORTANT RULES:\n"
    "1. Keep placeholders such as {{0}}, {{{{name}}}}, %s and ${{value}} exactly as they are.\n"
    "2. Do not add quotes, notes or explanations.\n"
    "3. Keep leading and trailing punctuation.\n\n"
    "Text:\n{text}"
)
