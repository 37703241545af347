from portal.views.auth_handlers import admin_auth as admin_auth
from portal.views.function_handlers import (
    admin_data as admin_data,
)
from portal.views.function_handlers import (
    ai_image as ai_image,
)
from portal.views.function_handlers import (
    ai_writer as ai_writer,
)
from portal.views.public_handlers import (
    health as health,
)
from portal.views.public_handlers import (
    public_collection as public_collection,
)
from portal.views.public_handlers import (
    site_settings as site_settings,
)
from portal.views.public_handlers import (
    verse_of_the_day as verse_of_the_day,
)
