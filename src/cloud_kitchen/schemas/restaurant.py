from typing import Optional

from pydantic import BaseModel


class SocialLinks(BaseModel):
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None


class RestaurantBase(BaseModel):
    name: str
    logo_url: Optional[str] = None
    tagline: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    whatsapp_number: Optional[str] = None
    email: Optional[str] = None
    opening_hours: Optional[str] = None
    social_links: SocialLinks = SocialLinks()
    is_gst_enabled: bool = False
    gst_number: Optional[str] = None


class RestaurantUpdate(RestaurantBase):
    pass


class RestaurantRead(RestaurantBase):
    id: Optional[int] = None  # None, если профиль ещё не сохранён

    class Config:
        from_attributes = True
