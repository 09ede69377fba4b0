from app.schemas.assets import Language

TRANSLATIONS = {
    Language.en: {
        "status_idle": "Upload your face and at least one asset to begin.",
        "status_ready_to_analyze": "Assets loaded. Run 'Analyze Inputs' to prepare the prompt.",
        "status_ready_to_render": "Prompt ready. Run 'Generate Composition' to render.",
        "status_analyzing": "Gemini is analyzing all your inputs to build a master prompt...",
        "status_analyzed": "Analysis complete. You can tweak the prompt below.",
        "status_rendering": "Gemini is fusing your identity into the composed scene...",
        "status_success": "Composition generated successfully!",
        "error_upload": "Failed to load image.",
        "error_requirements_analyze": "Upload your face and at least one other asset first.",
        "error_requirements_render": "A face image and a scene description are required.",
        "error_analyze": "Failed to analyze assets.",
        "error_render": "Failed to generate composition.",
    },
    Language.ru: {
        "status_idle": "Загрузите фото лица и хотя бы один элемент стиля.",
        "status_ready_to_analyze": "Ресурсы загружены. Запустите «Анализ», чтобы составить план.",
        "status_ready_to_render": "План готов. Запустите «Генерация», чтобы создать изображение.",
        "status_analyzing": "Gemini анализирует все входные данные для составления промпта...",
        "status_analyzed": "Анализ завершен. Вы можете поправить описание ниже.",
        "status_rendering": "Gemini внедряет вашу личность в созданную сцену...",
        "status_success": "Композиция успешно создана!",
        "error_upload": "Не удалось загрузить изображение.",
        "error_requirements_analyze": "Сначала загрузите фото лица и хотя бы один элемент стиля.",
        "error_requirements_render": "Нужны фото лица и описание сцены.",
        "error_analyze": "Ошибка анализа ресурсов.",
        "error_render": "Ошибка генерации изображения.",
    },
}


def t(language: Language, key: str) -> str:
    return TRANSLATIONS[language][key]
