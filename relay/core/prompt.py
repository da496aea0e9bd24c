SYSTEM_PROMPT = (
    "You are a helpful, friendly assistant. Provide concise and accurate responses."
)

ERROR_REPLY = "Sorry, there was an error processing your request."

NO_RESPONSE = "[No response]"

GREETING = (
    "Hello! I'm an LLM chat app powered by Cloudflare Workers AI. "
    "How can I help you today?"
)
