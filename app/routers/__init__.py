"""
Routers package - HTTP endpoints grouped by studio.

Modules:
- chat: Omni-Chat assistant
- images: Image Studio (create/edit)
- videos: Video Studio (Veo jobs)
- devices: Device Hub (natural language device control)
"""
