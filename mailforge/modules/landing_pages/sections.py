"""
Landing page sections
=====================

Block vocabulary of the landing page builder: hero, text, image, form,
testimonial, features and call-to-action.
"""
import re
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...editor import Block, BlockRegistry, Document, Payload

PLACEHOLDER_IMAGE = 'https://images.unsplash.com/photo-1557804506-669a67965ba0?w=800&h=400&fit=crop'
HERO_BACKGROUND = 'https://images.unsplash.com/photo-1557804506-669a67965ba0?w=1200&h=600&fit=crop'
AVATAR_IMAGE = 'https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=100&h=100&fit=crop&crop=face'


class HeroContent(Payload):
    headline: str = 'Your Amazing Headline'
    subheadline: str = 'A compelling subheadline that converts'
    button_text: str = 'Get Started'
    button_url: str = '#signup'
    background_image: str = ''


class HeroStyle(Payload):
    text_align: str = 'center'
    padding: str = '80px 20px'
    background_color: str = '#1f2937'
    color: str = '#ffffff'


class TextContent(Payload):
    text: str = 'Enter your text content here...'


class TextStyle(Payload):
    font_size: str = '16px'
    line_height: str = '1.6'
    padding: str = '40px 20px'
    text_align: str = 'left'


class ImageContent(Payload):
    src: str = PLACEHOLDER_IMAGE
    alt: str = 'Image'
    caption: str = ''


class ImageStyle(Payload):
    text_align: str = 'center'
    padding: str = '40px 20px'


class FormContent(Payload):
    title: str = 'Subscribe to Our Newsletter'
    description: str = 'Get the latest updates and exclusive content'
    fields: List[str] = Field(default_factory=lambda: ['email'])
    button_text: str = 'Subscribe'
    success_message: str = 'Thank you for subscribing!'


class FormStyle(Payload):
    background_color: str = '#f9fafb'
    padding: str = '60px 20px'
    text_align: str = 'center'


class TestimonialContent(Payload):
    quote: str = 'This product has transformed our business completely.'
    author: str = 'John Smith'
    company: str = 'Tech Corp'
    avatar: str = AVATAR_IMAGE


class TestimonialStyle(Payload):
    background_color: str = '#ffffff'
    padding: str = '60px 20px'
    text_align: str = 'center'
    border_left: str = '4px solid #dc2626'


class FeatureItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ''


def _default_features():
    return [
        FeatureItem(title='Feature 1', description='Amazing feature description'),
        FeatureItem(title='Feature 2', description='Another great feature'),
        FeatureItem(title='Feature 3', description='One more awesome feature'),
    ]


class FeaturesContent(Payload):
    title: str = 'Why Choose Us'
    features: List[FeatureItem] = Field(default_factory=_default_features)


class FeaturesStyle(Payload):
    padding: str = '60px 20px'
    background_color: str = '#ffffff'


class CtaContent(Payload):
    headline: str = 'Ready to Get Started?'
    description: str = 'Join thousands of satisfied customers today'
    button_text: str = 'Start Free Trial'
    button_url: str = '#signup'


class CtaStyle(Payload):
    background_color: str = '#dc2626'
    color: str = '#ffffff'
    padding: str = '80px 20px'
    text_align: str = 'center'


class HeroSection(Block):
    type: Literal['hero'] = 'hero'
    content: HeroContent = Field(default_factory=HeroContent)
    style: HeroStyle = Field(default_factory=HeroStyle)


class TextSection(Block):
    type: Literal['text'] = 'text'
    content: TextContent = Field(default_factory=TextContent)
    style: TextStyle = Field(default_factory=TextStyle)


class ImageSection(Block):
    type: Literal['image'] = 'image'
    content: ImageContent = Field(default_factory=ImageContent)
    style: ImageStyle = Field(default_factory=ImageStyle)


class FormSection(Block):
    type: Literal['form'] = 'form'
    content: FormContent = Field(default_factory=FormContent)
    style: FormStyle = Field(default_factory=FormStyle)


class TestimonialSection(Block):
    type: Literal['testimonial'] = 'testimonial'
    content: TestimonialContent = Field(default_factory=TestimonialContent)
    style: TestimonialStyle = Field(default_factory=TestimonialStyle)


class FeaturesSection(Block):
    type: Literal['features'] = 'features'
    content: FeaturesContent = Field(default_factory=FeaturesContent)
    style: FeaturesStyle = Field(default_factory=FeaturesStyle)


class CtaSection(Block):
    type: Literal['cta'] = 'cta'
    content: CtaContent = Field(default_factory=CtaContent)
    style: CtaStyle = Field(default_factory=CtaStyle)


PAGE_REGISTRY = BlockRegistry(
    'landing_page',
    [HeroSection, TextSection, ImageSection, FormSection,
     TestimonialSection, FeaturesSection, CtaSection],
    labels={
        'hero': 'Hero Section',
        'text': 'Text Block',
        'image': 'Image',
        'form': 'Signup Form',
        'testimonial': 'Testimonial',
        'features': 'Features',
        'cta': 'Call to Action',
    },
)


def slugify(value):
    return re.sub(r'[^a-z0-9]+', '-', (value or '').lower()).strip('-')


class PageSettings(BaseModel):
    model_config = ConfigDict(extra='ignore')

    name: str = 'New Landing Page'
    slug: str = 'new-landing-page'
    title: str = 'Welcome to Our Landing Page'
    description: str = 'Convert visitors into subscribers'

    @field_validator('slug')
    @classmethod
    def _clean_slug(cls, value):
        slug = slugify(value)
        if not slug:
            raise ValueError('slug must contain at least one letter or digit')
        return slug


class LandingPageDocument(Document):
    """Landing page: every newly added section becomes the selected one"""
    kind = 'landing_page'
    registry = PAGE_REGISTRY
    metadata_class = PageSettings
    statuses = ('draft', 'published')
    auto_select = 'always'


def new_landing_page_document():
    """Fresh landing page with the seeded hero section, selected"""
    document = LandingPageDocument()
    hero = document.blocks.append(HeroSection(
        id=document.blocks.id_factory(),
        content=HeroContent(
            headline='Transform Your Business Today',
            subheadline='Join thousands of successful businesses using our platform',
            button_text='Get Started Free',
            button_url='#signup',
            background_image=HERO_BACKGROUND,
        ),
    ))
    document.select(hero.id)
    return document
