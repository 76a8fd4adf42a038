SYSTEM_TEMPLATE = """
    You are an AI assistant that turns video transcripts into study material.
    Follow the instructions in the user message exactly and return only the
    requested output, without commentary.
    """

CLEANING_TEMPLATE = """You are a transcript cleaner focused on removing verbal disfluencies.

CRITICALLY IMPORTANT: Your primary task is to REMOVE ALL filler words including but not limited to:
- 'uh', 'um', 'er', 'ah', 'eh'
- 'like', 'you know', 'I mean', 'kind of', 'sort of'
- Repeated words ('the the', 'I I I')
- False starts and incomplete phrases
- ANY hesitation sound or unnecessary verbal pause

Example: "I um actually uh wanted to like you know see if uh we could..." -> "I actually wanted to see if we could..."

Additional tasks (secondary to removing fillers):
1. Fix grammar and punctuation
2. Normalize numbers and acronyms
3. Preserve meaningful content
{marker_rule}
Return ONLY the cleaned transcript{marker_suffix}.

Transcript to clean:
{text}"""

MARKER_RULE = """
CRITICAL: Keep ALL [SEGx] and [/SEGx] markers EXACTLY as they appear - they are required for processing.
"""

SUMMARY_TEMPLATE = """You are a professional content summarizer. Given a transcript text, create a comprehensive summary that captures the main points and key ideas. The summary should be well-structured, clear, and maintain the original context. Focus on the most important information while being concise. Return ONLY the summary text, without any additional formatting or explanations.

Transcript:
{text}"""

QUIZ_TEMPLATE = """You are a quiz generator. Given the following content, create a quiz with {num_questions} multiple-choice questions.
Provide a short descriptive 'title' for the quiz.
For each question, include:
- id (integer starting from 1)
- question (string)
- choices (array of exactly 4 distinct strings)
- correctIndex (integer 0-3, the position of the correct choice)
Return ONLY a JSON object with two fields: 'title' (string) and 'questions' (array of questions).
Example: {{"title": "...", "questions": [{{"id": 1, "question": "...", "choices": ["...", "...", "...", "..."], "correctIndex": 0}}]}}
Do not include any other text or formatting.

Content:
{text}"""

PODCAST_TEMPLATE = """Transform the following content into an engaging podcast conversation between two hosts.

REQUIREMENTS:
- Duration: a natural 5-8 minute conversation
- Cover the content fully; do not compress or skip parts of it
- Natural, conversational dialogue that alternates between the hosts

HOSTS:
- {host_a}: An enthusiastic educator who explains concepts clearly
- {host_b}: A curious interviewer who asks insightful questions

FORMAT (very important - every line must be "Name: dialogue"):
{host_a}: [line]
{host_b}: [line]

CONTENT TO TRANSFORM:
{content}

Generate the podcast conversation, starting with {host_a}:"""

BOUNDED_PODCAST_TEMPLATE = """Transform the following content into an engaging podcast conversation between two hosts.

STRICT REQUIREMENTS:
- MAXIMUM DURATION: 2 minutes (approximately 300 words total)
- Keep each speaker turn to 15-25 words maximum
- Total conversation should be 250-300 words
- Natural, conversational dialogue

HOSTS:
- {host_a}: An enthusiastic educator who explains concepts clearly
- {host_b}: A curious interviewer who asks insightful questions

CONVERSATION STRUCTURE:
1. Brief intro (30 words max)
2. Main discussion (200 words max)
3. Quick conclusion (30 words max)

FORMAT (very important - use exactly this format):
{host_a}: [Brief intro - max 20 words]
{host_b}: [Question/reaction - max 20 words]
{host_a}: [Explanation - max 25 words]
{host_b}: [Follow-up - max 20 words]
{host_a}: [Response - max 25 words]
{host_b}: [Final question - max 20 words]
{host_a}: [Conclusion - max 25 words]
{host_b}: [Closing - max 15 words]

CONTENT TO TRANSFORM:
{content}

Generate a SHORT 2-minute podcast conversation (300 words MAX):"""
