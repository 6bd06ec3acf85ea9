"""Instruction templates for the generative-language service."""

FEEDBACK_PROMPT = """\
Analyze this English speech transcript and provide detailed feedback:

ORIGINAL PROMPT: "{prompt}"

TRANSCRIPT: "{transcript}"

Please provide:
1. fluencyScore (0-100) - How smoothly and naturally they spoke
2. grammarScore (0-100) - Correctness of grammar usage
3. vocabularyUsage (0-5) - How many target vocabulary words they used effectively
4. fillerWords - Number of "um", "uh", "like", etc.
5. suggestions - 3-5 specific improvement suggestions
6. improvedVocabulary - 3-5 advanced vocabulary words they could learn, \
each with a definition and an example

Be encouraging and constructive in your feedback. Focus on specific \
improvements they can make.
"""

DAILY_WORDS_PROMPT = """\
Generate {count} diverse English vocabulary words for daily learning.
{exclusions}
Include a mix of difficulty levels and categories.

Requirements:
- Mix of beginner (30%), intermediate (50%), and advanced (20%) words
- Diverse categories: business, academic, general, technology, science, arts, travel, etc.
- Clear, concise definitions
- Natural example sentences that show proper usage
- Phonetic pronunciation guide (e.g., /prəˌnʌnsiˈeɪʃən/)
- Words should be useful for English learners
- Avoid overly technical or obscure terms
- Focus on words that improve communication skills

Make the words engaging and practical for everyday English usage.
"""

DAILY_WORDS_EXCLUSION = "Do NOT include any of these words: {words}"

WORD_DETAILS_PROMPT = """\
Generate detailed information for the English word: "{word}"

Category: {category}
Difficulty Level: {difficulty}

Provide:
1. The word (exactly as provided, corrected if misspelled)
2. A clear, concise definition appropriate for {difficulty} level learners
3. A natural example sentence showing proper usage in context
4. Phonetic pronunciation guide between slashes (e.g., /prəˌnʌnsiˈeɪʃən/)

Make sure the definition and example are appropriate for the {category} \
category and {difficulty} difficulty level.
"""

SPEAKING_PROMPT_PROMPT = """\
Generate a speaking practice prompt for English learners:

CATEGORY: {category}
DIFFICULTY: {difficulty}

Create an engaging speaking prompt that:
1. Is appropriate for {difficulty} level English learners
2. Relates to {category} topics
3. Encourages 1-3 minutes of speaking
4. Includes exactly 5 target vocabulary words to use
5. Provides 2-3 helpful tips for answering

Make it interesting and practical for real-world English communication.
"""

CHAT_SYSTEM_PROMPT = """\
You are an AI English conversation partner designed to help users practice \
and improve their English communication skills. Your role is to:

1. Engage in natural, flowing conversations
2. Provide gentle corrections when needed
3. Use vocabulary appropriate to the user's level
4. Ask follow-up questions to keep conversations going
5. Be encouraging and supportive
6. Occasionally introduce new vocabulary in context
7. Adapt your speaking style to match the conversation type \
(casual, business, travel, academic)

Guidelines:
- Be patient and understanding
- Correct mistakes naturally within your responses
- Encourage the user to express themselves
- Ask open-ended questions
- Provide context for new words you introduce
- Keep responses conversational and engaging
- Celebrate progress and effort

Remember: Your goal is to help users become more confident English speakers \
through natural conversation practice.
"""
